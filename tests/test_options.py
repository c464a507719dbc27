"""
Tests for translating request option bags into rendering configurations.
"""

import pytest

from chrome_service.services.options import (
    translate_print_options,
    translate_screenshot_options,
)


class TestPrintOptions:
    def test_empty_options_send_nothing(self):
        assert translate_print_options(None).to_cdp_params() == {}
        assert translate_print_options({}).to_cdp_params() == {}

    def test_all_recognized_keys(self):
        config = translate_print_options(
            {
                "landscape": True,
                "display_header_footer": False,
                "print_background": True,
                "scale": 1.5,
                "paper_width": 8.5,
                "paper_height": 11.0,
                "margin_top": 0.4,
                "margin_bottom": 0.4,
                "margin_left": 0.25,
                "margin_right": 0.25,
                "page_ranges": "1-3,5",
            }
        )

        assert config.to_cdp_params() == {
            "landscape": True,
            "displayHeaderFooter": False,
            "printBackground": True,
            "scale": 1.5,
            "paperWidth": 8.5,
            "paperHeight": 11.0,
            "marginTop": 0.4,
            "marginBottom": 0.4,
            "marginLeft": 0.25,
            "marginRight": 0.25,
            "pageRanges": "1-3,5",
        }

    def test_wrong_type_is_ignored(self):
        config = translate_print_options({"scale": "big"})
        assert config.scale is None
        assert "scale" not in config.to_cdp_params()

    @pytest.mark.parametrize(
        "options",
        [
            {"landscape": "true"},
            {"landscape": 1},
            {"margin_top": True},
            {"margin_top": None},
            {"page_ranges": 3},
            {"paper_width": [8.5]},
        ],
    )
    def test_mistyped_values_never_raise(self, options):
        assert translate_print_options(options).to_cdp_params() == {}

    def test_integer_numbers_are_accepted_as_floats(self):
        config = translate_print_options({"scale": 2, "margin_left": 0})
        assert config.scale == 2.0
        assert isinstance(config.scale, float)
        assert config.to_cdp_params() == {"scale": 2.0, "marginLeft": 0.0}

    def test_unknown_keys_are_ignored(self):
        config = translate_print_options({"format": "A4", "landscape": True})
        assert config.to_cdp_params() == {"landscape": True}

    def test_non_mapping_input_yields_defaults(self):
        assert translate_print_options(["landscape"]).to_cdp_params() == {}

    def test_deterministic(self):
        options = {"landscape": True, "scale": 0.8, "page_ranges": "2"}
        assert translate_print_options(options) == translate_print_options(options)
        assert options == {"landscape": True, "scale": 0.8, "page_ranges": "2"}


class TestScreenshotOptions:
    def test_defaults(self):
        config = translate_screenshot_options(None)
        assert (config.width, config.height, config.full_page) == (1280, 720, False)

    def test_dimensions_are_truncated(self):
        config = translate_screenshot_options({"width": 1024.9, "height": 768.2, "full_page": True})
        assert (config.width, config.height, config.full_page) == (1024, 768, True)

    def test_integer_dimensions(self):
        config = translate_screenshot_options({"width": 640, "height": 480})
        assert (config.width, config.height) == (640, 480)

    @pytest.mark.parametrize(
        "options",
        [
            {"width": "800"},
            {"height": True},
            {"full_page": "yes"},
            {"width": float("nan")},
            {"height": float("inf")},
        ],
    )
    def test_mistyped_values_keep_defaults(self, options):
        config = translate_screenshot_options(options)
        assert (config.width, config.height, config.full_page) == (1280, 720, False)
