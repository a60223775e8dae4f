__version__ = "1.0.0"

DEFAULT_USER_AGENT = f"bmlt-python-query-client/{__version__}"
