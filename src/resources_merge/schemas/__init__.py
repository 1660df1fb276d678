"""JSON schemas for resources-merge configuration files.

This package contains JSON Schema files for validating configuration:
- merge_config.schema.json: Default (regex) and custom merge strategy definitions
"""
