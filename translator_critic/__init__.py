"""
AI Translator & Critic - translate text with one model, grade the translation with another.
"""
