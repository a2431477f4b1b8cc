"""Client wire protocol: framing, handshake and password authentication."""