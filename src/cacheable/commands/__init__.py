"""Built-in sub-commands of the ``cacheable`` command line."""
