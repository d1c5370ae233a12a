"""
Pydantic schemas used by the API.

Each module mirrors one backend table (or, for ``listing``, the
denormalized listing view) and defines ``*Create`` models for
requests, ``*Read`` models for responses and ``*Update`` models with
all fields optional.
"""
