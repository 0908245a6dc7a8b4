import sys
from pathlib import Path

import uvicorn

# コンテナ内と同じく "from main import app" で読み込む
sys.path.append(str(Path(__file__).resolve().parent.parent / "backend"))

from main import app

if __name__ == "__main__":
    # コンテナでは 80 番だが、ローカルでは特権ポートを避ける
    uvicorn.run(app, host="0.0.0.0", port=8000)
