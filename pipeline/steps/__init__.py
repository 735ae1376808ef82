"""Pipeline steps package.

This package contains the text transformations a pipeline can chain:
- summarize: Condenses text to a target length and layout
- translate: Renders text in a target language
- rewrite: Rewrites text for a tone and a style
- extract: Pulls keywords, entities, topics or sentiment

StepProcessor (pipeline.steps.processor) dispatches a step to its implementation.
"""
