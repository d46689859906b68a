"""ClassBeyond Core"""
