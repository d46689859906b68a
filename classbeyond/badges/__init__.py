"""Badges: catalog, evaluators and awarding"""
