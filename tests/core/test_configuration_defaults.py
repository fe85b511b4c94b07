import unittest

from templex.core.config import Configuration, config


class ConfigurationTests(unittest.TestCase):
    """Tests for the configuration singleton."""

    def tearDown(self):
        config.reset()

    def test_singleton(self):
        self.assertIs(Configuration(), config)

    def test_defaults(self):
        config.reset()
        self.assertEqual(config.get('resolution', 'max_values_per_variable'), 10)
        self.assertEqual(config.get('resolution', 'max_combinations'), 20)
        self.assertEqual(config.get('resolution', 'display_limit'), 5)
        self.assertFalse(config.get('resolution', 'skip_files_with_syntax_errors'))
        self.assertIn('tsconfig.json', config.get('modules', 'config_files'))

    def test_missing_keys_use_default(self):
        self.assertIsNone(config.get('resolution', 'missing'))
        self.assertEqual(config.get('nowhere', 'missing', 7), 7)

    def test_set_and_reset(self):
        config.set('resolution', 'max_combinations', 3)
        config.set('custom', 'flag', True)
        self.assertEqual(config.get('resolution', 'max_combinations'), 3)
        self.assertTrue(config.get('custom', 'flag'))
        config.reset()
        self.assertEqual(config.get('resolution', 'max_combinations'), 20)
        self.assertIsNone(config.get('custom', 'flag'))

    def test_reset_does_not_share_lists_with_defaults(self):
        config.get('oracle', 'not_ready_markers').append('warming up')
        config.reset()
        self.assertEqual(config.get('oracle', 'not_ready_markers'), ['loading'])
