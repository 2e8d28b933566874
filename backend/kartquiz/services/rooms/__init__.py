"""Room domain services: scoring, registry, session rules and idle expiry.

Pure room logic lives here so the Socket.IO gateway only deals with
transport concerns (who sent what, who hears about it).
"""
