#!/usr/bin/env python3
"""
Tests for configuration loading and validation
"""
import os
import json
import shutil
import tempfile
import unittest
from unittest.mock import patch

from orthocds.config import ConfigManager, ConfigSchema, DEFAULT_CONFIG
from orthocds.config.manager import coerce_env_value
from orthocds.core.context import ApplicationContext


class TestConfigManager(unittest.TestCase):
    """Configuration sources and their precedence"""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.config_path = os.path.join(self.temp_dir, "config.yml")
        with open(self.config_path, 'w') as f:
            f.write("targeted:\n  scaffold: dmel\n  threads: 4\nprediction:\n  method: estscan\n")

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def test_defaults_without_file(self):
        manager = ConfigManager()
        self.assertEqual(manager.config, DEFAULT_CONFIG)
        self.assertEqual(manager.errors, [])

    def test_defaults_are_not_shared(self):
        manager = ConfigManager()
        manager.set('targeted.scaffold', 'changed')
        self.assertEqual(DEFAULT_CONFIG['targeted']['scaffold'], 'scaffold')

    def test_file_values_merge_over_defaults(self):
        manager = ConfigManager(self.config_path)

        self.assertEqual(manager.get('targeted.scaffold'), 'dmel')
        self.assertEqual(manager.get('targeted.threads'), 4)
        self.assertEqual(manager.get('targeted.gap_threshold'), 0.1)
        self.assertEqual(manager.get('prediction.method'), 'estscan')

    def test_local_file_overrides_main_file(self):
        with open(os.path.join(self.temp_dir, "config.local.yml"), 'w') as f:
            f.write("targeted:\n  scaffold: local\n")

        manager = ConfigManager(self.config_path)

        self.assertEqual(manager.get('targeted.scaffold'), 'local')
        self.assertEqual(manager.get('targeted.threads'), 4)

    def test_json_file(self):
        json_path = os.path.join(self.temp_dir, "config.json")
        with open(json_path, 'w') as f:
            json.dump({'dedup': {'enabled': True}}, f)

        self.assertTrue(ConfigManager(json_path).get('dedup.enabled'))

    def test_environment_overrides(self):
        env = {
            'ORTHOCDS_TARGETED__GAP_THRESHOLD': '0.25',
            'ORTHOCDS_TARGETED__MAX_WORKERS': '3',
            'ORTHOCDS_PREDICTION__STRANDED': 'yes',
        }
        with patch.dict(os.environ, env):
            manager = ConfigManager(self.config_path)

        self.assertEqual(manager.get('targeted.gap_threshold'), 0.25)
        self.assertEqual(manager.get('targeted.max_workers'), 3)
        self.assertIs(manager.get('prediction.stranded'), True)

    def test_missing_file_falls_back_to_defaults(self):
        manager = ConfigManager(os.path.join(self.temp_dir, "absent.yml"))
        self.assertEqual(manager.get('prediction.method'), 'estscan')

    def test_broken_file_is_reported(self):
        with open(self.config_path, 'w') as f:
            f.write("targeted: [unclosed\n")

        manager = ConfigManager(self.config_path)

        self.assertTrue(any("Error loading config file" in e for e in manager.errors))

    def test_invalid_values_are_reported(self):
        with open(self.config_path, 'w') as f:
            f.write("targeted:\n  gap_threshold: 1.5\n  threads: many\nprediction:\n  method: glimmer\n")

        errors = ConfigManager(self.config_path).errors

        self.assertEqual(len(errors), 3)
        self.assertTrue(any("targeted.gap_threshold" in e for e in errors))
        self.assertTrue(any("targeted.threads" in e for e in errors))
        self.assertTrue(any("prediction.method" in e for e in errors))

    def test_section_and_tool_accessors(self):
        manager = ConfigManager(self.config_path)

        self.assertEqual(manager.get_section('dedup'), DEFAULT_CONFIG['dedup'])
        self.assertEqual(manager.get_section('absent'), {})
        self.assertEqual(manager.get_tool_path('mafft'), 'mafft')
        self.assertEqual(manager.get('no.such.key', 'fallback'), 'fallback')

    def test_environment_keeps_string_settings_as_strings(self):
        with patch.dict(os.environ, {'ORTHOCDS_TARGETED__SCAFFOLD': '123'}):
            manager = ConfigManager(self.config_path)
        self.assertEqual(manager.get('targeted.scaffold'), '123')

    def test_non_mapping_file_is_reported(self):
        with open(self.config_path, 'w') as f:
            f.write("- just\n- a list\n")

        manager = ConfigManager(self.config_path)

        self.assertTrue(any("must be a mapping" in e for e in manager.errors))
        self.assertEqual(manager.get('targeted.scaffold'), 'scaffold')

    def test_environment_key_below_a_value_is_reported(self):
        with patch.dict(os.environ, {'ORTHOCDS_PREDICTION__METHOD__X': '1'}):
            manager = ConfigManager(self.config_path)

        self.assertIn("Ignoring ORTHOCDS_PREDICTION__METHOD__X: prediction.method "
                      "is not a configuration section", manager.errors)
        self.assertEqual(manager.get('prediction.method'), 'estscan')

    def test_dedup_identity_is_not_configurable(self):
        with open(self.config_path, 'w') as f:
            f.write("dedup:\n  enabled: true\n  identity: 0.9\n")

        manager = ConfigManager(self.config_path)
        deduplicator = ApplicationContext(config_manager=manager).tools.create_deduplicator()

        self.assertEqual(DEFAULT_CONFIG['dedup'], {'enabled': False})
        self.assertEqual(deduplicator.IDENTITY, "1.0")


class TestEnvironmentValues(unittest.TestCase):

    def test_follows_existing_type(self):
        self.assertIs(coerce_env_value('off', False), False)
        self.assertIs(coerce_env_value('On', False), True)
        self.assertEqual(coerce_env_value('07', 'name'), '07')

    def test_guesses_without_existing_value(self):
        self.assertEqual(coerce_env_value('4'), 4)
        self.assertEqual(coerce_env_value('1e-5'), 1e-5)
        self.assertIs(coerce_env_value('no'), False)
        self.assertEqual(coerce_env_value('mafft'), 'mafft')


class TestConfigSchema(unittest.TestCase):

    def test_missing_required_section(self):
        errors = ConfigSchema.validate({})
        self.assertIn("Missing required configuration section: prediction", errors)

    def test_integer_evalue_is_accepted(self):
        config = json.loads(json.dumps(DEFAULT_CONFIG))
        config['targeted']['evalue'] = 1
        self.assertEqual(ConfigSchema.validate(config), [])

    def test_boolean_is_not_a_number(self):
        config = json.loads(json.dumps(DEFAULT_CONFIG))
        config['targeted']['threads'] = True
        errors = ConfigSchema.validate(config)
        self.assertEqual(len(errors), 1)
        self.assertIn("targeted.threads", errors[0])

    def test_worker_count_must_be_positive(self):
        config = json.loads(json.dumps(DEFAULT_CONFIG))
        config['targeted']['max_workers'] = 0
        self.assertEqual(ConfigSchema.validate(config),
                         ["Value for targeted.max_workers must be at least 1: 0"])

    def test_section_must_be_mapping(self):
        config = json.loads(json.dumps(DEFAULT_CONFIG))
        config['dedup'] = True
        self.assertEqual(ConfigSchema.validate(config),
                         ["Configuration section dedup must be a mapping"])


class TestApplicationContext(unittest.TestCase):

    def test_update_config_reaches_tool_factory(self):
        context = ApplicationContext()
        context.update_config('tools', 'hmmsearch_path', '/opt/hmmer/bin/hmmsearch')

        self.assertEqual(context.tools.create_profile_search().hmmsearch_path,
                         '/opt/hmmer/bin/hmmsearch')


if __name__ == '__main__':
    unittest.main()
