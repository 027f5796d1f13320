"""
Global Configuration for the Morse transmitter.
Centralizing tone, timing and audio format parameters so that encoding,
playback and capture always agree on the same format.
"""
import os

# Tone Parameters
SAMPLE_RATE = 22050 # サンプリングレート (Hz)
FREQ = 800          # トーン周波数 (Hz)
AMPLITUDE = 1.0     # フルスケールに対する振幅比
# 22050 // 800 = 27 samples per aligned period

# Timing Parameters
# Based on the 50 unit standard word "PARIS":
# dot duration (ms) = 1200 / wpm
SPEED = 20                        # words per minute
DOT_DURATION_MS = 1200.0 / SPEED  # 60ms @ 20wpm
DASH_UNITS = 3        # ダッシュの長さ (dot 単位)
SYMBOL_GAP_UNITS = 1  # 符号要素の後に常に付く無音
LETTER_GAP_UNITS = 2  # '|' で追加される無音 (1 + 2 = 3 units)
WORD_GAP_UNITS = 6    # ' ' で追加される無音 (1 + 6 = 7 units)

# Playback Format (8-bit signed mono)
PLAYBACK_DTYPE = 'int8'
PLAYBACK_CHANNELS = 1

# Capture Format
CAPTURE_CHANNELS = 2
CAPTURE_DTYPE = 'int8'        # 'int8' or 'int16'
CAPTURE_BIG_ENDIAN = False    # only meaningful for int16
CAPTURE_BUFFER_FRAMES = 4096  # デバイス内部バッファのフレーム数
CAPTURE_BLOCK_DIVISOR = 3     # 1回の read はバッファの 1/3

# Symbol Table
SHORT_GAP = '|'  # 文字間
WORD_GAP = ' '   # 単語間
SYMBOL_TABLE_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "morsecodes")
