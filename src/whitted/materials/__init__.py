"""Material module.

Components:
    phong: Material registry fields and Phong lighting terms

phong declares Taichi fields; import it after Taichi is initialized.
"""
