"""Date inference from photo paths and EXIF date writing for exif_setter"""
