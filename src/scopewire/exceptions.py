class ScopewireError(Exception):
    """Represent a base class for all scopewire-specific failures.

    Catch this type when you want to handle any scopewire error path without
    matching each concrete exception class individually.
    """


class ScopewireContextNotProvidedError(ScopewireError):
    """Signal resolution of a required context that has no active scope.

    Raised by a ``Resolver`` (or ``Context.resolve``) created with
    ``required=True`` when the current execution branch has no frame for the
    context and no mock value or mock factory is installed.

    Typical fixes include wrapping the calling code in the matching provider
    (for example ``with_database(make_database, handler)``), installing a mock
    with ``scopewire.testing.mock_context`` in tests, or creating the context
    with ``required=False`` when ``None`` is an acceptable answer.
    """


class ScopewireInvalidScopeError(ScopewireError, TypeError):
    """Signal an invalid argument passed to a scope-establishing API.

    Raised eagerly by providers when the builder or continuation is not
    callable, and by ``with_contexts`` when one of the composed scope
    establishers is not callable.

    Typical fix is passing a zero-argument callable (``lambda: Database()``)
    instead of an already-built instance.
    """
