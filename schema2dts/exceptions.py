"""Custom exceptions for schema2dts.

This module defines the hierarchy of exceptions raised while loading,
resolving and converting schema documents. Every error is fatal to the
current generation run: either a complete declaration text is produced or
the whole run fails.
"""


class Schema2DtsError(Exception):
    """Base exception for all schema2dts errors.

    All exceptions raised by schema2dts inherit from this class, making it
    easy to catch every generator failure with a single except clause.

    Example:
        try:
            codegen.generate()
        except Schema2DtsError as e:
            print(f"schema2dts error: {e}")
    """

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class SchemaError(Schema2DtsError):
    """Base exception for schema-related errors."""

    pass


class ParseError(SchemaError):
    """A JSON pointer could not be followed inside a schema document.

    Raised when a pointer is malformed or names a location that does not
    exist in the content it is applied to.

    Attributes:
        pointer: The JSON pointer that could not be followed.
        reason: Explanation of why navigation failed.
    """

    def __init__(self, pointer: str, reason: str | None = None):
        self.pointer = pointer
        self.reason = reason
        message = f"Failed to follow pointer '{pointer}'"
        if reason:
            message += f': {reason}'
        super().__init__(message)


class DocumentLoadError(SchemaError):
    """Failed to load a schema document from a source.

    Attributes:
        source: The source path or URL that failed to load.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, source: str, cause: Exception | None = None):
        self.source = source
        self.cause = cause
        message = f"Failed to load document from '{source}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)


class ResolutionError(SchemaError):
    """A $ref target could not be registered or found.

    Attributes:
        reference: The canonical id that could not be resolved.
        reason: Explanation of why the reference couldn't be resolved.
    """

    def __init__(self, reference: str, reason: str | None = None):
        self.reference = reference
        self.reason = reason
        message = f"Failed to resolve reference '{reference}'"
        if reason:
            message += f': {reason}'
        super().__init__(message)


class CodeGenerationError(Schema2DtsError):
    """Error while emitting declarations.

    Attributes:
        context: Additional context about what was being generated.
        cause: The underlying exception that caused the failure.
    """

    def __init__(
        self, message: str, context: str | None = None, cause: Exception | None = None
    ):
        self.context = context
        self.cause = cause
        full_message = message
        if context:
            full_message = f'{message} (while generating {context})'
        if cause:
            full_message += f': {cause}'
        super().__init__(full_message)


class UnsupportedTypeError(CodeGenerationError):
    """An unknown `type` value reached the emitter.

    Attributes:
        type_name: The offending type value.
        schema_id: The canonical id of the schema being emitted.
    """

    def __init__(self, type_name: str, schema_id: str | None = None):
        self.type_name = type_name
        self.schema_id = schema_id
        super().__init__(f"Unsupported schema type '{type_name}'", context=schema_id)


class ConfigurationError(Schema2DtsError):
    """Error in configuration.

    Attributes:
        config_path: The path to the configuration file, if applicable.
        field: The specific configuration field that is invalid.
    """

    def __init__(
        self, message: str, config_path: str | None = None, field: str | None = None
    ):
        self.config_path = config_path
        self.field = field
        full_message = message
        if config_path:
            full_message = f"{message} in '{config_path}'"
        if field:
            full_message += f' (field: {field})'
        super().__init__(full_message)


class OutputError(Schema2DtsError):
    """Error writing generated output.

    Attributes:
        output_path: The path where output was being written.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, output_path: str, cause: Exception | None = None):
        self.output_path = output_path
        self.cause = cause
        message = f"Failed to write output to '{output_path}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)
