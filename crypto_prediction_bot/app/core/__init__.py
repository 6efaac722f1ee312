"""Core application modules"""
