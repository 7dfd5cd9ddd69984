"""
Draftboard — live client for a remote draft-event service.

Layers:
  remote/  — HTTP client and snapshot models for the draft service
  sync/    — State cell, poll loop (Synchronizer), action dispatcher
  view/    — Pure view pipeline, presentation adapter, text rendering
  app/     — Session dispatch table and CLI entry point
"""
