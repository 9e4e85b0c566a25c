"""Exception hierarchy for schema generation failures."""


class SchemaGenerationError(Exception):
    """Base class for every failure raised by the generator."""


class TableNotFoundError(SchemaGenerationError):
    def __init__(self, table_name: str):
        self.table_name = table_name
        super().__init__(f'Table "{table_name}" not found or has no columns')


class UnsupportedSourceError(SchemaGenerationError):
    def __init__(self, dialect: str):
        self.dialect = dialect
        super().__init__(
            f"Schema generation currently only supports PostgreSQL (got '{dialect}')"
        )


class ConfigurationError(SchemaGenerationError):
    """Invalid runtime or pattern reference supplied by the caller."""


class PatternNotFoundError(ConfigurationError):
    def __init__(self, pattern_name: str, column_name: str = ""):
        self.pattern_name = pattern_name
        self.column_name = column_name
        where = f" (column '{column_name}')" if column_name else ""
        super().__init__(f"Unknown JSON pattern '{pattern_name}'{where}")


class EvaluationError(SchemaGenerationError):
    """The assembled schema could not be built against the supplied runtime."""
