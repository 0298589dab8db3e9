"""Pydantic Schemas — request/response models for the HTTP boundary."""
