from learning_ai.prompts.templates import PromptTemplate

__all__ = ["PromptTemplate"]
