"""
Workflow grid editor
Graph model, auto-layout and structural edits for grid-placed workflows
"""
__version__ = "1.0.0"
