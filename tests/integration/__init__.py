"""
Integration tests for the schedule sync workflow.

These tests use mocked AWS services to run complete flows across the
codec, validator, composer and dispatcher.
"""
