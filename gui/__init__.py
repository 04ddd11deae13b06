"""
Desktop front-end for the Fourier sketchpad (ttkbootstrap).
"""
