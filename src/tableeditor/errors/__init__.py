"""Custom exception hierarchy for tableeditor."""

from __future__ import annotations


class TableEditorError(Exception):
    """Base class for all custom errors raised by tableeditor."""


# --- 3-layer hierarchy ---

class DomainError(TableEditorError):
    """Base class for domain-level errors."""


class InfrastructureError(TableEditorError):
    """Base class for infrastructure-level errors."""


class ApplicationError(TableEditorError):
    """Base class for application-level errors."""


# --- Domain errors ---

class UnknownFieldError(DomainError):
    """Raised when a patch names a field outside the row schema."""


class FieldNotEditableError(DomainError):
    """Raised when the edit cursor is opened on a read-only column."""


# --- Infrastructure errors ---

class FetchError(InfrastructureError):
    """Raised when a page cannot be fetched or parsed from the data source."""


# --- Application errors ---

class SourceUnavailableError(ApplicationError):
    """Raised when no data source is configured or a local payload cannot be read."""


# --- Settings errors ---

class SettingsError(TableEditorError):
    """Base class for settings related failures."""


class SettingsLoadError(SettingsError):
    """Raised when the settings file cannot be parsed or loaded."""


class SettingsValidationError(SettingsError):
    """Raised when settings data fails schema validation."""
