"""LLM prompt engines.

Each engine builds a prompt from local entity data, declares the JSON
schema it expects back, and returns the parsed object from ILLMClient
unchanged.
"""
