"""
persistence Django application initialization.
"""

from django.apps import AppConfig


class PersistenceConfig(AppConfig):
    """
    Configuration for the persistence Django application.
    """

    name = "umbraco_core.apps.persistence"
    verbose_name = "Umbraco Core > Persistence"
    default_auto_field = "django.db.models.AutoField"
    label = "umb_persistence"

    def ready(self):
        """
        Register the built-in property editors.
        """
        from .editors import register_builtin_editors  # pylint: disable=import-outside-toplevel

        register_builtin_editors()
