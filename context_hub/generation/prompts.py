"""Prompt templates for capture questions and summaries."""

from typing import List, Dict


class PromptTemplate:
    """Templates for generating chat messages."""

    QUESTION_SYSTEM = """You are a helpful AI assistant that answers questions based on the user's personal knowledge base.
The user has saved various captures (notes, links, quotes, etc.) and is asking you questions about them.

When answering:
- Be concise and direct
- Reference specific captures when relevant (e.g., "According to capture [2]...")
- When asked about recent topics, patterns, or themes, analyze the captures provided
- If asked about topics and captures are provided, summarize what topics appear in them
- If no relevant information is in the captures, say so clearly
- Use markdown formatting for better readability
- Be conversational and helpful
- IMPORTANT: You have access to the user's captures below. Always check them before saying you don't have information."""

    SUMMARY_SYSTEM = """You are a helpful assistant that creates concise summaries.
Generate a brief 1-2 sentence summary of the given content.
Focus on the main idea or key takeaway."""

    @staticmethod
    def question_answering(question: str, context: str) -> List[Dict[str, str]]:
        """Messages for answering a question from the capture context block."""
        return [
            {'role': 'system', 'content': PromptTemplate.QUESTION_SYSTEM},
            {'role': 'user', 'content': question + context},
        ]

    @staticmethod
    def summarization(content: str, capture_type: str = "text") -> List[Dict[str, str]]:
        """Messages for summarizing a single capture."""
        return [
            {'role': 'system', 'content': PromptTemplate.SUMMARY_SYSTEM},
            {'role': 'user', 'content': f"Summarize this {capture_type}:\n\n{content}"},
        ]
