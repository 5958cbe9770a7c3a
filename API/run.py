import logging

from screentime_api import create_app

logging.basicConfig(level=logging.INFO)
app = create_app()


@app.route('/')
def hello_world():
    return 'Screen time API is running'


if __name__ == '__main__':
    app.run()
