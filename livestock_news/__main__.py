"""
Run the development server: python -m livestock_news
"""
import logging
import os
import sys

from livestock_news import create_app

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)

app = create_app()


if __name__ == '__main__':
    port = int(os.environ.get('PORT', 3001))
    logging.getLogger(__name__).info(f"News search backend running on port {port}")
    app.run(host='0.0.0.0', port=port, debug=os.environ.get('FLASK_DEBUG', 'False') == 'True')
