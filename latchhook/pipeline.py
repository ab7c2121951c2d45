"""Latch hook diagram pipeline."""
from pathlib import Path
from typing import List, Optional, Tuple, Union
import logging
import time

from latchhook.types import DiagramConfig, LatchhookError, Palette, Raster
from latchhook.raster_ingest import load_image, write_image
from latchhook.resize import resize
from latchhook.smoothing import smooth_neighbors
from latchhook.palette import build_palette
from latchhook.perceptual import paletted_assign, reassign_colors
from latchhook.diagram import render_diagram

logger = logging.getLogger(__name__)


class LatchhookPipeline:
    """Turns an image into a reduced-color latch hook diagram."""

    def __init__(self, config: Optional[DiagramConfig] = None):
        """
        Initialize pipeline.

        Args:
            config: Configuration (uses defaults if None)
        """
        self.config = config or DiagramConfig()
        self.palette: Palette = []
        self.stages: List[Tuple[str, Raster]] = []

    def run(self, raster: Raster) -> Raster:
        """
        Run all in-memory stages on a raster.

        Args:
            raster: Source raster

        Returns:
            The diagram raster

        Raises:
            LatchhookError: If any stage fails
        """
        config = self.config
        self.stages = [('01_original', raster)]

        if config.resize_target is not None:
            width, height = config.resize_target
            logger.info(f"Resizing {raster.width}x{raster.height} -> {width}x{height}")
            raster = resize(raster, width, height, strict=config.strict_resize)
            self.stages.append(('02_resized', raster))

        if config.smooth:
            logger.info("Smoothing neighbors")
            raster = smooth_neighbors(raster)
            self.stages.append(('03_smoothed', raster))

        logger.info(f"Reducing to {config.num_colors} colors ({config.strategy})")
        self.palette = build_palette(raster, config.num_colors)
        if config.strategy == 'paletted':
            quantized = paletted_assign(raster, self.palette).to_raster()
        else:
            quantized = reassign_colors(raster, self.palette)
        self.stages.append(('04_quantized', quantized))

        logger.info(f"Rendering diagram with {config.cell_side}px cells")
        diagram = render_diagram(quantized, config.cell_side, config)
        self.stages.append(('05_diagram', diagram))
        return diagram

    def process(
        self,
        input_path: Union[str, Path],
        output_path: Union[str, Path]
    ) -> Raster:
        """
        Load an image, build its diagram and write it out.

        Nothing is written if any stage fails.

        Args:
            input_path: Path to input image
            output_path: Path for the output diagram (format from extension)

        Returns:
            The diagram raster
        """
        start_time = time.time()

        raster = load_image(input_path)
        diagram = self.run(raster)
        write_image(output_path, diagram)

        if self.config.save_stages is not None:
            self._save_stages(self.config.save_stages)

        elapsed = time.time() - start_time
        logger.info(f"Done in {elapsed:.2f}s: {output_path}")
        return diagram

    def _save_stages(self, stages_dir: Path) -> None:
        """Save intermediate rasters as PNG files."""
        stages_dir.mkdir(parents=True, exist_ok=True)
        for name, stage in self.stages:
            try:
                write_image(stages_dir / f"stage_{name}.png", stage, 'PNG')
            except LatchhookError as e:
                logger.warning(f"Could not save stage {name}: {e}")
