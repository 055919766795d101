import unittest

from menuaim.config import MenuAimOptions, cfg, normalize_direction


class TestOptions(unittest.TestCase):
    def test_defaults(self):
        options = MenuAimOptions.from_options()
        self.assertEqual(options.content_direction, "right")
        self.assertEqual(options.delay, 200)
        self.assertEqual(options.item_selector, ".menu-aim__item")
        self.assertEqual(options.active_class_name, "menu-aim__item--active")
        self.assertEqual(options.delaying_class_name, "menu-aim--delaying")
        self.assertEqual(options.threshold, 50)
        self.assertIsNone(options.on_activate)
        self.assertAlmostEqual(options.delay_seconds, 0.2)

    def test_camel_case_aliases(self):
        def callback(item):
            return item

        options = MenuAimOptions.from_options(
            {
                "contentDirection": "left",
                "menuItemSelector": "li",
                "menuItemActiveClassName": "on",
                "activateCallback": callback,
            }
        )
        self.assertEqual(options.content_direction, "left")
        self.assertEqual(options.item_selector, "li")
        self.assertEqual(options.active_class_name, "on")
        self.assertIs(options.on_activate, callback)

    def test_none_means_default_but_zero_is_kept(self):
        options = MenuAimOptions.from_options(delay=None, threshold=0)
        self.assertEqual(options.delay, cfg.DELAY_MS)
        self.assertEqual(options.threshold, 0)

    def test_clamping(self):
        options = MenuAimOptions.from_options(delay=-5, threshold=-10)
        self.assertEqual(options.delay, 0)
        self.assertEqual(options.threshold, 0)
        self.assertEqual(MenuAimOptions.from_options(delay=60_000).delay, 60_000)

    def test_keyword_overrides_mapping(self):
        options = MenuAimOptions.from_options({"delay": 100}, delay=300)
        self.assertEqual(options.delay, 300)

    def test_unknown_option(self):
        with self.assertRaises(TypeError):
            MenuAimOptions.from_options(colour="red")

    def test_direction_normalization(self):
        self.assertEqual(normalize_direction("top"), "top")
        self.assertEqual(normalize_direction("Top"), "right")
        self.assertEqual(MenuAimOptions.from_options(contentDirection="LEFT").content_direction, "right")
        self.assertEqual(normalize_direction("sideways"), "right")
        self.assertEqual(normalize_direction(None), "right")


if __name__ == '__main__':
    unittest.main()
