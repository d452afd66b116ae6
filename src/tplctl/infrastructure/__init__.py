"""Infrastructure layer — registry HTTP, archives, subprocesses, filesystem.

This layer depends on stdlib, third-party libs (requests), and the domain
layer for its models and error types. It must never import from services,
commands, or output. The service layer composes these adapters into stages.
"""
