"""
Centralized configuration defaults for stylesheet generation.

These are the values used when neither the mapping set, the caller, the CLI nor
an XSLT_GENERATOR_* environment variable says otherwise.

Single Source of Truth: Change these values once; all modules automatically use updated defaults.
"""


class GenerationDefaults:
    """
    Centralized defaults for stylesheet generation.

    All values can be overridden via environment variables or CLI arguments:
    - XSLT_GENERATOR_DEFAULT_FORMAT=json xslt_generator mapping.json
    - xslt_generator mapping.json --format flat --delimiter "|"
    """

    # Output
    DEFAULT_FORMAT = "xml"  # xml, json, flat (csv is an alias for flat)
    DELIMITER = ","  # Flat column delimiter
    XSLT_VERSION = "1.0"  # XML and Flat stylesheets; JSON is always 3.0

    # Iteration anchors
    JSON_ROOT_PATH = "/*[1]"  # for-each anchor for JSON map population
    FLAT_ROOT_PATH = "/*"  # apply-templates select for Flat records
    FLAT_RECORD_PATH = "*"  # match pattern of the Flat record template

    # Behaviour
    JSON_TYPED_VALUES = False  # Type-aware JSON leaf values instead of plain value-of
    VALIDATE_OUTPUT = True  # Run the output validator after generation

    # Logging
    LOG_LEVEL = "WARNING"  # Default logging level (CRITICAL, ERROR, WARNING, INFO, DEBUG)

    @classmethod
    def to_dict(cls) -> dict:
        """
        Export all defaults as a dictionary.

        Returns:
            Dictionary of all GenerationDefaults class attributes.
        """
        return {
            key: getattr(cls, key)
            for key in dir(cls)
            if not key.startswith('_') and key.isupper()
        }

    @classmethod
    def log_summary(cls, logger=None):
        """
        Log a summary of all generation defaults.

        Args:
            logger: Optional logger instance. If None, prints to stdout.
        """
        config_dict = cls.to_dict()
        summary = "\n".join([f"  {key}: {value}" for key, value in sorted(config_dict.items())])
        message = f"Generation Configuration Defaults:\n{summary}"

        if logger:
            logger.info(message)
        else:
            print(message)
