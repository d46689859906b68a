"""ClassBeyond Badge Engine"""
