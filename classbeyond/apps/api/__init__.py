"""ClassBeyond HTTP API"""
