"""Crypto prediction bot application"""
