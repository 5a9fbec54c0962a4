"""Core Module

Settings, logging, exceptions and the typed records shared by every stage.
"""
