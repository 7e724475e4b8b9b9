"""Palette exporters producing files for downstream tools."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..core.extractor import Palette

SUPPORTED_FORMATS = ["json", "txt"]


class PaletteExporter:
    """Write extracted palettes to disk.

    The JSON layout matches the ``palette.json`` download of the web tool:
    ``colors`` (id, hex, rgb, name), ``extractedAt`` and ``totalColors``.
    """

    def __init__(self, indent: int = 2):
        """Initialize palette exporter.

        Args:
            indent: JSON indentation
        """
        self.indent = indent
        self.logger = logging.getLogger(__name__)

    def to_json_dict(
        self, palette: Palette, exported_at: Optional[datetime] = None
    ) -> Dict[str, Any]:
        """Build the JSON document for a palette.

        Args:
            palette: Extracted palette
            exported_at: Export timestamp, now (UTC) when omitted

        Returns:
            JSON-serializable dictionary
        """
        if exported_at is None:
            exported_at = datetime.now(timezone.utc)

        colors: List[Dict[str, Any]] = []
        for index, color in enumerate(palette, start=1):
            colors.append(
                {
                    "id": index,
                    "hex": color.hex,
                    "rgb": color.rgb,
                    "name": f"Color {index}",
                }
            )

        return {
            "colors": colors,
            "extractedAt": exported_at.isoformat(),
            "totalColors": len(colors),
        }

    def export_json(
        self,
        palette: Palette,
        output_path: Union[str, Path],
        exported_at: Optional[datetime] = None,
    ) -> Path:
        """Write the palette as JSON."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w") as f:
            json.dump(self.to_json_dict(palette, exported_at), f, indent=self.indent)

        return output_path

    def export_text(self, palette: Palette, output_path: Union[str, Path]) -> Path:
        """Write one hex code per line."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w") as f:
            for hex_code in palette.hex_codes():
                f.write(f"{hex_code}\n")

        return output_path

    def export(
        self,
        palette: Palette,
        output_dir: Union[str, Path],
        formats: Optional[List[str]] = None,
        project_name: str = "palette",
    ) -> Dict[str, str]:
        """Export a palette in several formats.

        Args:
            palette: Extracted palette
            output_dir: Directory for generated files
            formats: Formats to write, ``["json"]`` when omitted
            project_name: Base name of generated files

        Returns:
            Mapping of format to written file path
        """
        formats = formats or ["json"]
        invalid = [fmt for fmt in formats if fmt not in SUPPORTED_FORMATS]
        if invalid:
            raise ValueError(
                f"Invalid export format(s): {', '.join(invalid)}. "
                f"Valid formats: {', '.join(SUPPORTED_FORMATS)}"
            )

        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        generated: Dict[str, str] = {}
        if "json" in formats:
            path = self.export_json(palette, output_dir / f"{project_name}.json")
            generated["json"] = str(path)
            self.logger.info(f"Generated JSON: {path}")

        if "txt" in formats:
            path = self.export_text(palette, output_dir / f"{project_name}.txt")
            generated["txt"] = str(path)
            self.logger.info(f"Generated text palette: {path}")

        return generated
