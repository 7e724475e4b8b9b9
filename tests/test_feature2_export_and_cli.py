"""BDD/TDD tests for Feature 2: Export, Configuration and Command Line."""

import json
import logging
from datetime import datetime, timezone

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest
import yaml
from click.testing import CliRunner
from PIL import Image
from pydantic import ValidationError

from palettegen.cli import cli
from palettegen.core.extractor import PaletteExtractor
from palettegen.image.sampler import PixelBuffer
from palettegen.output.exporter import PaletteExporter
from palettegen.utils.color import hex_to_rgb, rgb_to_css, rgb_to_hex
from palettegen.utils.config import ConfigManager
from palettegen.utils.logging import PerformanceLogger, setup_logging
from palettegen.utils.visualization import Visualizer


@pytest.fixture
def two_color_palette():
    pixels = np.zeros((20, 20, 4), dtype=np.uint8)
    pixels[:, :10] = (255, 0, 0, 255)
    pixels[:, 10:] = (0, 0, 255, 255)
    return PaletteExtractor().extract(PixelBuffer.from_array(pixels))


@pytest.fixture
def striped_image_path(tmp_path):
    image = Image.new("RGB", (90, 60), (255, 255, 255))
    for x in range(30, 60):
        for y in range(60):
            image.putpixel((x, y), (0, 120, 255))
    path = tmp_path / "stripes.png"
    image.save(path)
    return path


class TestStory2_1_PaletteExport:
    """Story 2.1: Palette JSON Export

    As a designer
    I want to download my palette as JSON
    So that other tools can import it
    """

    def setup_method(self):
        """Set up test fixtures."""
        self.exporter = PaletteExporter()

    def test_given_palette_when_serialized_then_document_layout_matches(self, two_color_palette):
        """
        Given a two-color palette
        When I build the JSON document
        Then colors carry 1-based ids, names, hex and rgb, plus totals
        """
        exported_at = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)

        document = self.exporter.to_json_dict(two_color_palette, exported_at)

        assert document == {
            "colors": [
                {"id": 1, "hex": "#0000ff", "rgb": "rgb(0, 0, 255)", "name": "Color 1"},
                {"id": 2, "hex": "#ff0000", "rgb": "rgb(255, 0, 0)", "name": "Color 2"},
            ],
            "extractedAt": "2024-05-01T12:30:00+00:00",
            "totalColors": 2,
        }

    def test_given_no_timestamp_then_export_time_is_used(self, two_color_palette):
        before = datetime.now(timezone.utc)

        document = self.exporter.to_json_dict(two_color_palette)

        assert datetime.fromisoformat(document["extractedAt"]) >= before

    def test_given_formats_when_exported_then_files_written(self, two_color_palette, tmp_path):
        generated = self.exporter.export(
            two_color_palette, tmp_path / "out", ["json", "txt"], project_name="demo"
        )

        assert set(generated) == {"json", "txt"}
        with open(generated["json"]) as f:
            assert json.load(f)["totalColors"] == 2
        with open(generated["txt"]) as f:
            assert f.read().splitlines() == ["#0000ff", "#ff0000"]

    def test_given_unknown_format_then_value_error(self, two_color_palette, tmp_path):
        with pytest.raises(ValueError, match="Invalid export format"):
            self.exporter.export(two_color_palette, tmp_path, ["ase"])

    def test_given_empty_palette_then_document_is_empty(self):
        empty = PaletteExtractor().extract(PixelBuffer.from_bytes(1, 1, bytes(4)))

        document = self.exporter.to_json_dict(empty)

        assert document["colors"] == []
        assert document["totalColors"] == 0


class TestStory2_2_Configuration:
    """Story 2.2: Configurable Extraction

    As a power user
    I want to tune extraction through files, profiles and environment
    So that I can adapt the palette to different kinds of images
    """

    def test_given_no_file_then_defaults_match_reference_constants(self):
        config = ConfigManager().get_extraction_config()

        assert config.palette_size == 5
        assert config.max_dimension == 300
        assert config.bucket_size == 15
        assert config.alpha_threshold == 128
        assert (config.initial_distance, config.distance_step, config.min_distance) == (40.0, 5.0, 20.0)

    def test_given_yaml_file_then_values_deep_merged(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({"extraction": {"palette_size": 8}}))

        manager = ConfigManager(path)

        assert manager.get("extraction.palette_size") == 8
        assert manager.get("extraction.bucket_size") == 15
        assert manager.get("export.project_name") == "palette"

    def test_given_saved_json_then_round_trips(self, tmp_path):
        manager = ConfigManager()
        manager.set("extraction.max_dimension", 120)
        path = tmp_path / "config.json"

        manager.save_config(path)

        assert ConfigManager(path).get("extraction.max_dimension") == 120

    def test_given_malformed_file_then_value_error(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        with pytest.raises(ValueError, match="Failed to load configuration"):
            ConfigManager(path)

    def test_given_environment_overrides_then_applied(self, monkeypatch):
        monkeypatch.setenv("PALETTEGEN_PALETTE_SIZE", "3")
        monkeypatch.setenv("PALETTEGEN_ALLOW_UPSCALE", "true")

        config = ConfigManager.from_env().get_extraction_config()

        assert config.palette_size == 3
        assert config.allow_upscale is True

    def test_given_profile_then_applied_and_unknown_rejected(self):
        manager = ConfigManager()

        manager.apply_profile("detailed")
        assert manager.get("extraction.max_dimension") == 600
        assert manager.get("extraction.palette_size") == 8

        with pytest.raises(ValueError, match="Unknown profile"):
            manager.apply_profile("psychedelic")

    def test_given_invalid_values_then_reported(self):
        manager = ConfigManager()
        manager.set("extraction.bucket_size", 0)
        manager.set("export.default_formats", ["json", "svg"])

        is_valid, errors = manager.validate_config()

        assert not is_valid
        assert any("bucket_size" in error for error in errors)
        assert any("svg" in error for error in errors)
        with pytest.raises(ValidationError):
            manager.get_extraction_config()

    def test_given_defaults_then_valid(self):
        is_valid, errors = ConfigManager().validate_config()

        assert is_valid
        assert errors == []

    def test_given_zero_palette_size_then_valid_like_extraction_config(self):
        """
        Given a palette size of zero
        When I validate the configuration
        Then it is accepted, just as building the extraction config is
        """
        manager = ConfigManager()
        manager.set("extraction.palette_size", 0)

        is_valid, errors = manager.validate_config()

        assert is_valid, errors
        assert manager.get_extraction_config().palette_size == 0

    def test_given_string_values_then_validated_without_type_error(self):
        manager = ConfigManager()
        manager.set("extraction.max_dimension", "300")

        assert manager.validate_config() == (True, [])

        manager.set("extraction.max_dimension", "big")
        is_valid, errors = manager.validate_config()

        assert not is_valid
        assert any(error.startswith("extraction.max_dimension") for error in errors)

    def test_given_min_distance_above_initial_then_reported(self):
        manager = ConfigManager()
        manager.set("extraction.min_distance", 50.0)

        is_valid, errors = manager.validate_config()

        assert not is_valid
        assert any("min_distance" in error for error in errors)


class TestStory2_3_CommandLine:
    """Story 2.3: Command Line Extraction

    As a developer
    I want to extract palettes from the terminal
    So that I can script palette generation
    """

    def setup_method(self):
        """Set up test fixtures."""
        self.runner = CliRunner()

    def test_given_image_when_json_requested_then_palette_printed(self, striped_image_path):
        result = self.runner.invoke(cli, ["-q", "extract", str(striped_image_path), "--json"])

        assert result.exit_code == 0, result.output
        document = json.loads(result.output)
        assert document["totalColors"] == 2
        assert {c["hex"] for c in document["colors"]} == {"#ffffff", "#0078ff"}

    def test_given_count_option_then_palette_truncated(self, striped_image_path):
        result = self.runner.invoke(
            cli, ["-q", "extract", str(striped_image_path), "--json", "--count", "1"]
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["totalColors"] == 1

    def test_given_output_dir_then_exports_and_preview_written(self, striped_image_path, tmp_path):
        output_dir = tmp_path / "exports"

        result = self.runner.invoke(
            cli,
            [
                "extract",
                str(striped_image_path),
                "--output",
                str(output_dir),
                "--export-format",
                "json,txt",
                "--project-name",
                "stripes",
                "--preview",
            ],
        )

        assert result.exit_code == 0, result.output
        assert (output_dir / "stripes.json").exists()
        assert (output_dir / "stripes.txt").exists()
        assert (output_dir / "stripes_preview.png").exists()

    def test_given_undecodable_image_then_error_exit(self, tmp_path):
        bogus = tmp_path / "bogus.png"
        bogus.write_bytes(b"\x00\x01 not an image")

        result = self.runner.invoke(cli, ["extract", str(bogus)])

        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_given_transparent_image_then_empty_palette_reported(self, tmp_path):
        path = tmp_path / "clear.png"
        Image.new("RGBA", (10, 10), (255, 0, 0, 0)).save(path)

        result = self.runner.invoke(cli, ["extract", str(path)])

        assert result.exit_code == 0, result.output
        assert "No opaque pixels found" in result.output

    def test_given_quiet_flag_then_empty_palette_message_suppressed(self, tmp_path):
        """
        Given a fully transparent image
        When I extract with --quiet
        Then nothing is printed to stdout
        """
        path = tmp_path / "clear.png"
        Image.new("RGBA", (10, 10), (255, 0, 0, 0)).save(path)

        result = self.runner.invoke(cli, ["-q", "extract", str(path)])

        assert result.exit_code == 0, result.output
        assert result.stdout == ""

    def test_given_invalid_export_format_then_usage_error(self, striped_image_path, tmp_path):
        result = self.runner.invoke(
            cli,
            ["extract", str(striped_image_path), "-o", str(tmp_path), "--export-format", "pdf"],
        )

        assert result.exit_code == 1
        assert "Invalid export format" in result.output

    def test_given_init_config_then_loadable_file_created(self, tmp_path):
        path = tmp_path / "palettegen.yaml"

        result = self.runner.invoke(cli, ["init-config", "-o", str(path), "--profile", "fast"])

        assert result.exit_code == 0, result.output
        manager = ConfigManager(path)
        assert manager.get("extraction.max_dimension") == 150
        assert manager.get_extraction_config().palette_size == 5

    def test_given_config_option_then_used_for_extraction(self, striped_image_path, tmp_path):
        path = tmp_path / "one.json"
        path.write_text(json.dumps({"extraction": {"palette_size": 1}}))

        result = self.runner.invoke(
            cli, ["-q", "--config", str(path), "extract", str(striped_image_path), "--json"]
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["totalColors"] == 1

    def test_version(self):
        result = self.runner.invoke(cli, ["version"])

        assert result.exit_code == 0
        assert "PaletteGen Version" in result.output


class TestStory2_4_SupportingUtilities:
    """Story 2.4: Previews, Logging and Color Strings"""

    def test_given_palette_then_preview_figure_saved(self, two_color_palette, tmp_path):
        path = tmp_path / "preview.png"
        image = Image.new("RGB", (20, 20), (255, 0, 0))

        fig = Visualizer().plot_palette(two_color_palette, image=image, save_path=str(path))

        assert path.exists()
        assert len(fig.axes) == 2

    def test_given_empty_palette_then_preview_still_renders(self, tmp_path):
        fig = Visualizer().plot_palette([], save_path=str(tmp_path / "empty.png"))

        assert len(fig.axes) == 1

    def test_given_log_file_then_debug_messages_written(self, tmp_path):
        log_file = tmp_path / "logs" / "palettegen.log"
        setup_logging(log_file=str(log_file), enable_colors=False)

        logging.getLogger("palettegen.test").warning("hello from the test")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "hello from the test" in log_file.read_text()

    def test_given_cli_verbosity_flags_then_levels_follow(self):
        """
        Given the --verbose and --quiet flags
        When logging is set up
        Then palettegen follows the flag and image libraries never drop below WARNING
        """
        assert setup_logging(verbose=True, enable_colors=False) == logging.DEBUG
        assert logging.getLogger("palettegen").level == logging.DEBUG
        assert logging.getLogger("PIL").level == logging.WARNING

        assert setup_logging(verbose=True, quiet=True, enable_colors=False) == logging.ERROR
        assert logging.getLogger("palettegen").level == logging.ERROR
        assert logging.getLogger("matplotlib").level == logging.ERROR

        assert setup_logging(enable_colors=False) == logging.INFO

    def test_given_unstarted_timer_then_zero(self):
        assert PerformanceLogger().end_timer("never-started") == 0.0

    def test_color_string_helpers(self):
        assert rgb_to_hex(15, 0, 255) == "#0f00ff"
        assert rgb_to_css(15, 0, 255) == "rgb(15, 0, 255)"
        assert hex_to_rgb("#0F00FF") == (15, 0, 255)
        with pytest.raises(ValueError):
            hex_to_rgb("#fff")
