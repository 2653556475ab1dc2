"""
Resilient UI exerciser for the NativeBridge debug app, driven over Appium.
"""
