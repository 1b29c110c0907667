"""Core pipeline for bumpctl.

Configuration, changelog rendering, the update queue and the orchestrator
that ties the collaborators together.
"""
