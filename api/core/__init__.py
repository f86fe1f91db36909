"""
Shared, cross-cutting code for the API.

`core/` should contain small building blocks that multiple features use
(JSON record store, settings, logging, remote downloads). Keep
feature-specific logic in the corresponding feature package
(e.g. `products/`).
"""
