from config.config import DEFAULT_GEMINI_MODEL
from models.search_result import GenerationRequest, SearchQuery

PROFILE_PROMPT_TEMPLATE = (
    'Provide a detailed public profile summary for the individual named: "{subject_name}".\n'
    "Focus on professional background, public social media presence, "
    "known locations (if public), and notable achievements.\n"
    "Format the output in clear sections. If multiple people share this name, "
    "provide brief summaries for the most prominent ones.\n"
    "Maintain a professional, investigative tone."
)


class RequestBuilder:
    """Turns a subject name into a grounded generation request."""

    def __init__(self, model_name: str = DEFAULT_GEMINI_MODEL):
        self.model_name = model_name

    def build(self, subject_name: str | SearchQuery) -> GenerationRequest:
        """
        Build the profile request for ``subject_name``.

        The name is embedded verbatim; callers guarantee it is non-empty.
        """
        if isinstance(subject_name, SearchQuery):
            subject_name = subject_name.subject_name

        return GenerationRequest(
            model=self.model_name,
            prompt=PROFILE_PROMPT_TEMPLATE.format(subject_name=subject_name),
            grounding=True,
        )
