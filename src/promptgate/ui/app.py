"""Gradio composer UI for promptgate."""

import logging

import gradio as gr

from promptgate.core.config import ComposerConfig, ConfigurationError, load_composer_config

from .composer import PromptComposer
from .handlers import clear_form, lock_form, submit_prompt, unlock_form
from .models import ComposerState

logger = logging.getLogger(__name__)


def create_ui(config: ComposerConfig, composer: PromptComposer | None = None) -> gr.Blocks:
    """Create the composer form.

    Args:
        config: Composer configuration
        composer: Optional composer to send through (defaults to one
            pointed at ``config.gateway_url``)

    Returns:
        Gradio Blocks app
    """
    composer = composer or PromptComposer(config.gateway_url, timeout=config.request_timeout)

    app = gr.Blocks(title="promptgate")

    with app:
        # Session state - one instance per user
        composer_state = gr.State(ComposerState())

        gr.Markdown(
            """
            # promptgate
            ### Send a prompt and an optional image to the model
            """
        )

        with gr.Row():
            with gr.Column(scale=1):
                prompt_input = gr.Textbox(
                    label="Prompt",
                    placeholder="Describe this image...",
                    lines=4,
                )
                # gr.File keeps the original bytes; gr.Image would re-encode
                image_input = gr.File(
                    label="Image (optional)",
                    file_types=["image"],
                    type="filepath",
                )
                with gr.Row():
                    submit_btn = gr.Button("Submit", variant="primary")
                    clear_btn = gr.Button("Clear", variant="secondary")

            with gr.Column(scale=1):
                status_output = gr.Markdown(value="*Ready*")
                response_output = gr.JSON(label="Response")

        def on_submit(prompt, image_path, state):
            return submit_prompt(prompt, image_path, state, composer)

        submit_btn.click(
            fn=lock_form,
            outputs=[submit_btn],
            queue=False,
        ).then(
            fn=on_submit,
            inputs=[prompt_input, image_input, composer_state],
            outputs=[response_output, status_output, composer_state],
        ).then(
            fn=unlock_form,
            outputs=[submit_btn],
            queue=False,
        )

        clear_btn.click(
            fn=clear_form,
            inputs=[composer_state],
            outputs=[prompt_input, image_input, response_output, status_output, composer_state],
        )

    return app


def main():
    """Launch the composer UI.

    This function is registered as the ``promptgate-ui`` console script in
    ``pyproject.toml``.
    """
    try:
        config = load_composer_config()
    except ConfigurationError as e:
        raise SystemExit(str(e)) from None

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    logger.info("Starting promptgate composer...")
    logger.info(f"Gateway: {config.gateway_url}")
    logger.info(f"Server: {config.ui_server_name}:{config.ui_server_port}")

    app = create_ui(config)
    app.queue()
    app.launch(
        server_name=config.ui_server_name,
        server_port=config.ui_server_port,
        share=config.ui_share,
        show_error=True,
    )


if __name__ == "__main__":
    main()
