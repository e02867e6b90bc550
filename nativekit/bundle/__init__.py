"""
Native bundle install pipeline.

Modules, leaf first: progress, build_info, checker, locator, fetcher,
extractor, hardening, arguments, and builder (the orchestrator that
sequences them).
"""
