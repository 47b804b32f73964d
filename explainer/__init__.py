"""
Concept explainer: a FastAPI service that explains a concept with an LLM, and a
terminal dashboard that calls it and can read the answer aloud.
"""
