"""Enable/disable and update the add-ons of an application instance."""

__version__ = "0.1.0"
