"""Pydantic request/response models"""
