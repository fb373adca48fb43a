"""
Application Layer

Orchestrates domain objects and infrastructure ports to run playback.

Structure:
- interfaces/: Port interfaces for infrastructure adapters
- services/: Session state machine, registry, provider chain and engine façade
"""
