"""
Prompts for the document wizard:
  (1) Inferring the form fields a document needs from its description
  (2) Rendering the final HTML document from the description and the filled-in form

Both are sent as a single user message; the description is embedded verbatim.
"""
import json

FIELD_TYPES_HINT = '"text", "number", "date", "email"'


class PromptsBuilder:
    """Builds the fixed-template instructions sent to the completion endpoint."""

    @staticmethod
    def build_field_schema_prompt(document_prompt: str) -> str:
        return f"""
Based on the description of a formal document below, return ONLY valid JSON: an array of objects. Each object must have the properties "name" and "type" (e.g. {FIELD_TYPES_HINT}) and describe one piece of data needed to generate the document. Do not add any explanation or text outside the JSON array.
Document description:
{document_prompt}
"""

    @staticmethod
    def build_document_prompt(document_prompt: str, form_data: dict) -> str:
        data_json = json.dumps(form_data, indent=2, ensure_ascii=False)
        return f"""
Based on the following description of a formal document:
"{document_prompt}"
and the following data in JSON format:
{data_json}
Generate a complete formal document in HTML, reproducing the expected layout and formatting, ready to be rendered directly in a browser. The response must contain only clean HTML code.
"""


def build_field_schema_prompt(document_prompt: str) -> str:
    return PromptsBuilder.build_field_schema_prompt(document_prompt)


def build_document_prompt(document_prompt: str, form_data: dict) -> str:
    return PromptsBuilder.build_document_prompt(document_prompt, form_data)
