"""Twinkly device protocol: HTTP control API + realtime UDP frames"""
