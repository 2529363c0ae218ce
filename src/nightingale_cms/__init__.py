"""
Nightingale CMS data core: identity resolution, integrity audit, legacy
migration, and the JSON document service.
"""

__version__ = "1.0.0"
