"""
Test suite for the loanquill package.
"""
