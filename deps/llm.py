from llm import TextGenerator, get_default_generator


def get_text_generator() -> TextGenerator:
    """
    Language model used by the problem routes.

    Override in tests with ``app.dependency_overrides[get_text_generator]``.
    """
    return get_default_generator()
