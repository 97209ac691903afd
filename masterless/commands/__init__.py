"""Masterless CLI commands"""
