"""ClassBeyond Apps"""
