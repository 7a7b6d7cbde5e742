"""
Prompt Builder

Wraps the user's question in the FAQ-generation instruction.
"""

FAQ_SYSTEM_PROMPT = """You are an expert FAQ generator. Create clear, concise, and helpful FAQ entries.
For the given question, generate a response in JSON format with:
- title: A clear, specific FAQ title
- answer: A comprehensive but concise answer (2-4 paragraphs)
- category: The topic category
- keywords: Array of relevant keywords

Keep answers accurate, helpful, and easy to understand."""


def build_prompt(question: str) -> str:
    """
    Build the FAQ-generation prompt

    Args:
        question: The user's question

    Returns:
        Full prompt sent to the model
    """
    return f"{FAQ_SYSTEM_PROMPT}\n\nQuestion: {question.strip()}\n\nGenerate the FAQ entry:"
