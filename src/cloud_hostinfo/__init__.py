import click


class DefaultOpt(click.Option):
    def __init__(self, *args, **kwargs):
        kwargs["show_default"] = True
        super().__init__(*args, **kwargs)
