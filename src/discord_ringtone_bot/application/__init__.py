"""
Application Layer

Contains the use cases that orchestrate domain objects and infrastructure.

Structure:
- services/: the voice session state machine and the command dispatcher
- interfaces/: Port interfaces for infrastructure adapters
"""
