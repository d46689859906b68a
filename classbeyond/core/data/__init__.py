"""Data layer: engine, models and repositories"""
